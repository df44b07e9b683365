class PageScriptError(Exception):

    pass


class UsageError(PageScriptError):

    pass


class ScriptLoadError(PageScriptError):

    pass


class LaunchError(PageScriptError):

    pass


class NavigationError(PageScriptError):

    pass


class EvaluationError(PageScriptError):

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class CleanupError(PageScriptError):

    pass


class VisualDiffError(PageScriptError):

    pass
