# runner/errors.py
class RunnerError(Exception):
    pass

class SetupError(RunnerError):
    pass

class HelperStartError(SetupError):
    pass

class HelperNotReadyError(SetupError):
    pass

class BrowserStartError(SetupError):
    pass

class TaskError(RunnerError):
    pass

class TeardownError(RunnerError):
    pass
