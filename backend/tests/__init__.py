# Force SQLModel table registration at test discovery time
from resource_api.models.todo import TodoRecord  # noqa: F401
