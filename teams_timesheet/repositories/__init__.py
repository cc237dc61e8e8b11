from teams_timesheet.repositories.accessors import RepositoryAccessors

__all__ = ["RepositoryAccessors"]
