from utils.output_utils import OutputHandler
from utils.logging_utils import LoggingHandler
from utils.tab_completion_utils import TabCompletionHandler


class UtilsHandler:
    """
    Container for utility services shared by the sessions built from one
    SessionConfig. Each service is created on first use.
    """

    def __init__(self, config):
        """
        :param config: SessionConfig instance
        """
        self.config = config
        self._output = None
        self._logging = None
        self._tab_completion = None

    @property
    def output(self):
        if self._output is None:
            self._output = OutputHandler(self.config)
        return self._output

    @property
    def logging(self):
        if self._logging is None:
            self._logging = LoggingHandler(self.config, self.output)
        return self._logging

    @property
    def tab_completion(self):
        if self._tab_completion is None:
            self._tab_completion = TabCompletionHandler(self.config, self.output)
        return self._tab_completion
