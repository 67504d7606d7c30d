"""Restaurant booking example for actionkit"""

# Import validators so they are registered before forms.yaml is built.
from . import validators  # noqa: F401
