"""HTTP reachability probe for application readiness."""

import requests


class HttpProbeService:
    """Reports whether an HTTP endpoint accepts connections."""

    def __init__(self, logger, requests_module=requests, timeout: float = 5.0):
        self.logger = logger
        self.requests = requests_module
        self.timeout = timeout

    def is_responding(self, url: str) -> bool:
        # Any HTTP status means the server is listening.
        try:
            response = self.requests.request(
                "GET",
                url,
                allow_redirects=True,
                timeout=self.timeout,
                stream=True,
            )
        except self.requests.RequestException as exc:
            self.logger.debug("HTTP probe of %s failed: %s", url, exc)
            return False

        self.logger.debug("HTTP probe of %s answered with status %s", url, response.status_code)
        response.close()
        return True
