class TreeShapeError(ValueError):
    """A parsed tree cannot be traversed because a section has the wrong shape."""

    def __init__(self, path: str, section: str, detail: str):
        self.path = path
        self.section = section
        self.detail = detail
        super().__init__(f"{path or '<tree>'}: section '{section}' {detail}")


class ConfigError(ValueError):
    pass
