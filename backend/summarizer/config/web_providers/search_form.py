import logging
import re

from summarizer.config.settings import settings
from summarizer.config.web_providers.base import SearchFormFields

logger = logging.getLogger(__name__)

HIDDEN_INPUT_PATTERN = re.compile(r'<input[^>]*type=["\']hidden["\'][^>]*>', re.IGNORECASE)
NAME_ATTR_PATTERN = re.compile(r'name=["\']([^"\']+)["\']', re.IGNORECASE)
VALUE_ATTR_PATTERN = re.compile(r'value=["\']([^"\']*)["\']', re.IGNORECASE)


def extract_hidden_fields(html: str) -> dict[str, str]:
    """
    Collect every <input type="hidden"> as name -> value.

    Regex scrape, not a DOM parse: attribute order and quote style are
    tolerated, values are kept exactly as written.

    """
    hidden: dict[str, str] = {}
    for tag in HIDDEN_INPUT_PATTERN.findall(html or ''):
        name = NAME_ATTR_PATTERN.search(tag)
        if not name:
            continue
        value = VALUE_ATTR_PATTERN.search(tag)
        hidden[name.group(1)] = value.group(1) if value else ''
    return hidden


class CandidateFormFields(SearchFormFields):
    """
    Writes each logical value under every known candidate field name.

    The target form's generated names shift between deployments, so all
    candidates are sent at once and the server ignores the unknown ones.
    """

    name = 'candidates'

    def __init__(self, candidates: dict[str, list[str]]):
        self.candidates = candidates

    @classmethod
    def from_settings(cls) -> 'CandidateFormFields':
        return cls(
            {
                'date_from': list(settings.SUPREME_DATE_FROM_FIELDS),
                'date_to': list(settings.SUPREME_DATE_TO_FIELDS),
                'min_pages': list(settings.SUPREME_MIN_PAGES_FIELDS),
                'free_text': list(settings.SUPREME_FREE_TEXT_FIELDS),
                'submit': list(settings.SUPREME_SUBMIT_FIELDS),
            }
        )

    def apply(self, payload: dict[str, str], values: dict[str, str]) -> dict[str, str]:
        form = dict(payload)
        for logical_name, value in values.items():
            field_names = self.candidates.get(logical_name, [])
            if not field_names:
                logger.warning('No form field candidates configured for %s', logical_name)
            for field_name in field_names:
                form[field_name] = value
        return form
