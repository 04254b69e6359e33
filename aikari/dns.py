"""DNS A-record lookups over DNS-over-HTTPS."""

from __future__ import annotations

from typing import List

import requests

from aikari.logger import get_logger

DEFAULT_DOH_QUERY_HOST = "https://dns.alidns.com/resolve"

_A_RECORD_TYPE = 1
_TIMEOUT = 10


def get_dns_a_records(
    target_domain: str, query_host: str = DEFAULT_DOH_QUERY_HOST
) -> List[str]:
    """Return the A-record addresses of ``target_domain``.

    Any failure of the query or of the response gives an empty list.
    """
    log = get_logger()
    try:
        response = requests.get(
            query_host,
            params={"name": target_domain, "type": "A"},
            timeout=_TIMEOUT,
        )
    except requests.RequestException as err:
        log.warning("DoH query failed: %s", err)
        return []

    if response.status_code != 200:
        log.warning("DoH query returned a non-200 code: %s", response.status_code)
        return []

    try:
        parsed = response.json()
    except ValueError as err:
        log.warning("Failed to parse DoH query result: %s", err)
        return []

    if not isinstance(parsed, dict) or "Answer" not in parsed:
        log.warning("Failed to resolve DoH query result: No answer")
        return []
    answers = parsed["Answer"]
    if not isinstance(answers, list):
        log.warning("Failed to resolve DoH query result: Malformed response")
        return []

    result = []
    for answer in answers:
        if int(answer["type"]) == _A_RECORD_TYPE:
            log.log(5, "Found new DNS A record: %s", answer["data"])
            result.append(str(answer["data"]))
    return result