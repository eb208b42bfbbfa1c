# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base model configuration shared by all engine value objects.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EngineModel(BaseModel):
    """Immutable value object exposed by the engine.

    Fields are snake_case in Python and camelCase on the wire
    (``model_dump(by_alias=True)``), matching the host application's
    document field names.
    """

    model_config = ConfigDict(
        # Accept both snake_case names and camelCase aliases
        populate_by_name=True,
        alias_generator=to_camel,
        # Results are never mutated after construction
        frozen=True,
        arbitrary_types_allowed=True
    )
