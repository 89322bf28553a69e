"""Stand-ins for requests.Response."""

from unittest.mock import Mock
from requests.structures import CaseInsensitiveDict


def make_response(status_code=200, json_data=None, headers=None):
    """Build a fake response with the attributes the client reads."""
    response = Mock()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(headers or {})
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response
