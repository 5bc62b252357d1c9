from fitness_client.controllers.activity_detail import ActivityDetailController
from fitness_client.controllers.activity_list import ActivityListController

__all__ = ["ActivityDetailController", "ActivityListController"]
