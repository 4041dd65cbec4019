"""REST API client for the sentence scramble server."""

import requests


class ScrambleAPIClient:
    """Client for communicating with the sentence scramble REST API."""

    def __init__(self, base_url: str = "http://localhost:8000", student: str = ""):
        self.base_url = base_url.rstrip('/')
        self.student = student
        self.session = requests.Session()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        if params is None:
            params = {}
        params['student'] = self.student
        response = self.session.get(f"{self.base_url}{endpoint}", params=params)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict) -> dict:
        """Make a POST request."""
        data['student'] = self.student
        response = self.session.post(f"{self.base_url}{endpoint}", json=data)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict:
        """Check if the server is running."""
        response = self.session.get(f"{self.base_url}/")
        response.raise_for_status()
        return response.json()

    def parse_assignment(self, fragment: str) -> dict:
        """Decode a shared link fragment into an assignment."""
        return self._get("/api/assignments/parse", {'fragment': fragment})

    def get_units(self, fragment: str, index: int) -> dict:
        """Get the scrambled units for one sentence."""
        return self._get("/api/play/units", {'fragment': fragment, 'index': index})

    def check(self, fragment: str, index: int, answer: list[str]) -> dict:
        """Submit an ordering for a sentence."""
        return self._post("/api/play/check", {
            'fragment': fragment,
            'index': index,
            'answer': answer
        })

    def reveal(self, fragment: str, index: int) -> dict:
        """Reveal the answer for a sentence."""
        return self._post("/api/play/reveal", {
            'fragment': fragment,
            'index': index
        })

    def get_progress(self, fragment: str) -> dict | None:
        """Saved progress, or None when the student has not started."""
        try:
            return self._get("/api/progress", {'fragment': fragment})
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                return None
            raise

    def reset_progress(self, fragment: str) -> dict:
        """Throw away saved progress."""
        response = self.session.delete(
            f"{self.base_url}/api/progress",
            params={'fragment': fragment, 'student': self.student}
        )
        response.raise_for_status()
        return response.json()
