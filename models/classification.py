"""
Classification value object - language, sophistication and topic of an idea.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict


class Language(str, Enum):
    DE = "de"
    EN = "en"


class SophisticationLevel(str, Enum):
    """How academically dense the input reads."""
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Category(str, Enum):
    """Topic categories. Declaration order is the classifier's scan order."""
    TECHNOLOGY = "Technology"
    SCIENCE = "Science"
    SOCIETY = "Society"
    ECONOMY = "Economy"
    ETHICS = "Ethics"
    PSYCHOLOGY = "Psychology"
    ENVIRONMENT = "Environment"
    PHILOSOPHY = "Philosophy"


DEFAULT_CATEGORY = Category.PHILOSOPHY


class Classification(BaseModel):
    """Derived deterministically from the input text."""
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    language: Language
    sophistication_level: SophisticationLevel
    category: Category

    def to_dict(self) -> dict:
        return {
            "language": self.language.value,
            "sophistication_level": self.sophistication_level.value,
            "category": self.category.value,
        }
