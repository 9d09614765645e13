from enum import StrEnum


class PostStatus(StrEnum):
    open = "open"
    planned = "planned"
    in_progress = "in_progress"
    done = "done"
    declined = "declined"
