import re

# \w is unicode aware, so CJK names match as well
MENTION_RE = re.compile(r"@(\w+)")
QUERY_RE = re.compile(r"^\w+$")


def active_mention_query(text, cursor=None):
    """Return the partial name typed after the last ``@`` before the cursor, if any."""
    before = text if cursor is None else text[:cursor]
    at = before.rfind("@")
    if at == -1:
        return None
    query = before[at + 1:]
    return query if QUERY_RE.match(query) else None


def insert_mention(text, cursor, user):
    """Replace the ``@query`` before the cursor with ``@name ``.

    Returns the new text and the cursor position just after the mention.
    """
    before = text[:cursor]
    at = before.rfind("@")
    if at == -1:
        raise ValueError("no mention in progress before the cursor")
    mention = f"@{user.get('name') or user['email']} "
    return text[:at] + mention + text[cursor:], at + len(mention)


def extract_mentions(text):
    return MENTION_RE.findall(text)


class MentionDraft:
    """Comment text being composed plus the users picked from autocomplete."""

    def __init__(self, text=""):
        self.text = text
        self.cursor = len(text)
        self._selected = {}

    def type(self, text, cursor=None):
        self.text = text
        self.cursor = len(text) if cursor is None else cursor
        return active_mention_query(self.text, self.cursor)

    def select(self, user):
        self.text, self.cursor = insert_mention(self.text, self.cursor, user)
        self._selected[user["id"]] = user

    def mentioned_user_ids(self):
        return list(self._selected)

    def reset(self):
        self.text = ""
        self.cursor = 0
        self._selected.clear()
