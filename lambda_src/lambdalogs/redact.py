# redact.py
import re

REDACTED = "REDACTED"

SCHEME_PATTERN = re.compile(r"mongodb(?:\+srv)?://")
AUTHORITY_END = re.compile(r"[/\s]")


def _redact_one(rest):
    # The user info ends at the last '@' before the first '/' following an '@'.
    # Passwords may hold '#', '?', ':' or '/' and still be fully replaced.
    first_at = rest.find("@")
    if first_at == -1:
        return rest
    end = AUTHORITY_END.search(rest, first_at)
    authority = rest if end is None else rest[:end.start()]
    userinfo, _, _hosts = authority.rpartition("@")
    if ":" not in userinfo:
        return rest
    return f"{REDACTED}:{REDACTED}{rest[len(userinfo):]}"


def redact_mongodb_url(mongodb_url):
    """Replace the username and password of a MongoDB URL with a placeholder.

    Works on a bare URL or on text embedding one or more URLs (log lines,
    tracebacks). Anything without a ``user:password@`` segment is returned as-is.
    """
    if not mongodb_url:
        return mongodb_url

    matches = list(SCHEME_PATTERN.finditer(mongodb_url))
    if not matches:
        return mongodb_url

    parts = [mongodb_url[:matches[0].start()]]
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(mongodb_url)
        parts.append(match.group())
        parts.append(_redact_one(mongodb_url[match.end():end]))
    return "".join(parts)
