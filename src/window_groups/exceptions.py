"""Exception classes for WindowGroups."""


class WindowGroupsError(Exception):
    """Base exception for WindowGroups errors."""
    pass


class GroupError(WindowGroupsError):
    """Exception raised for group bookkeeping errors."""
    pass


class GroupNotFoundError(GroupError):
    """Exception raised when a group id no longer exists."""

    def __init__(self, group_id: str):
        super().__init__(f"Group not found: {group_id}")
        self.group_id = group_id


class GroupNameConflictError(GroupError):
    """Exception raised when a group name collides with an existing one (case-insensitive)."""

    def __init__(self, name: str):
        super().__init__(f"A group with this name already exists: {name}")
        self.name = name


class InvalidGroupError(GroupError):
    """Exception raised for malformed group data."""
    pass


class WindowAlreadyGroupedError(GroupError):
    """Exception raised when a selected window already belongs to another group."""

    def __init__(self, application_name: str, window_title: str, group_name: str):
        super().__init__(
            f"'{application_name} - {window_title}' already belongs to group '{group_name}'"
        )
        self.application_name = application_name
        self.window_title = window_title
        self.group_name = group_name


class WindowServerError(WindowGroupsError):
    """Exception raised when querying or manipulating windows fails."""
    pass


class StorageError(WindowGroupsError):
    """Exception raised when groups cannot be persisted."""
    pass
