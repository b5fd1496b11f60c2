"""Form field classification and file upload matching."""

from .field_classifier import FormFieldClassifier, classify
from .strategies import (
    AttributeStrategy,
    BaseFieldStrategy,
    ContextStrategy,
    LabelStrategy,
    TypeInferenceStrategy,
)
from .upload_matcher import check_compatibility, cv_upload_targets, match_uploads

__all__ = [
    "FormFieldClassifier",
    "classify",
    "BaseFieldStrategy",
    "AttributeStrategy",
    "LabelStrategy",
    "ContextStrategy",
    "TypeInferenceStrategy",
    "match_uploads",
    "check_compatibility",
    "cv_upload_targets",
]
