from abc import ABC, abstractmethod


class SearchFormFields(ABC):
    """
    Abstract base for mapping logical search values onto form field names.
    The preset runner only knows logical names (date_from, date_to, min_pages,
    free_text, submit); each implementation decides which form fields they land in.
    """

    name: str

    @abstractmethod
    def apply(self, payload: dict[str, str], values: dict[str, str]) -> dict[str, str]:
        """
        Write logical values into a form payload.

        Args:
            payload: Form fields already collected (hidden inputs)
            values: Logical field name -> value

        Returns:
            The payload to submit
        """
        pass
