class DuplicateValueError(Exception):
    """A unique column already holds the value being written."""

    def __init__(self, field: str):
        super().__init__(f"Duplicate value for {field}")
        self.field = field
