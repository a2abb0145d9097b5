from enum import Enum

# status is stored as free text; these are the values the UI offers
class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
