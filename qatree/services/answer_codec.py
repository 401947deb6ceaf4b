import logging
from typing import List, NamedTuple, Optional, Sequence
from qatree.models.question import Option

logger = logging.getLogger(__name__)

SEPARATOR = ":"

class ParsedOption(NamedTuple):
    id: str
    content: str

def encode_option(option_id: str, label: str) -> str:
    """Builds the "id:label" answer token. The id must not contain a colon."""
    return f"{option_id}{SEPARATOR}{label}"

def parse_option_string(token) -> Optional[ParsedOption]:
    """
    Splits an answer token on its first colon.
    Returns None when the value is not a string or has no separator.
    """
    if not isinstance(token, str) or SEPARATOR not in token:
        return None
    option_id, content = token.split(SEPARATOR, 1)
    return ParsedOption(option_id, content)

def find_option_label(options: Optional[Sequence[Option]], option_id: Optional[str]) -> Optional[str]:
    if not options or option_id is None:
        return None
    for option in options:
        if option.id == option_id:
            return option.label
    return None

def normalize_choice_token(options: Optional[Sequence[Option]], token: str) -> str:
    """
    Returns the stored form of a submitted choice.
    Tokens that already carry a label are kept; a bare option id gets its
    label attached from the option list; unknown bare ids are kept verbatim.
    """
    if parse_option_string(token) is not None:
        return token
    label = find_option_label(options, token)
    if label is None:
        logger.debug(f"Choice '{token}' matches no option, storing it unresolved")
        return token
    return encode_option(token, label)

def decode_all(tokens: Optional[Sequence[str]]) -> List[ParsedOption]:
    """Decodes every token, silently dropping those without a separator."""
    parsed = []
    for token in tokens or []:
        item = parse_option_string(token)
        if item is not None:
            parsed.append(item)
    return parsed
