"""Base model class for all chainsql tree nodes."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class ChainBaseModel(BaseModel):
    """Base model for every node of a statement tree.

    Provides common functionality for all chainsql models including:
    - Serialization to dictionary via to_dict()
    - Consistent configuration (enum values stored as plain strings)
    - Validation of field reassignment
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        use_enum_values=True,
        validate_assignment=True
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary for inspection and debugging.

        Returns:
            Dictionary representation of the node and its children
        """
        data = self.model_dump(by_alias=False, exclude_none=True)

        def convert_nested(obj):
            if isinstance(obj, ChainBaseModel):
                return obj.to_dict()
            elif isinstance(obj, dict):
                return {k: convert_nested(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert_nested(item) for item in obj]
            elif hasattr(obj, 'value'):  # Handle enums
                return obj.value
            return obj

        return convert_nested(data)
