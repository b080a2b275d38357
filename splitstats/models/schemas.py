from typing import List

from pydantic import BaseModel, Field, model_validator

from splitstats.experiments.types import VariantObservation


class VariantCountsRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Variant name, e.g. 'control'")
    views: int = Field(..., ge=0, description="Users who saw the variant")
    conversions: int = Field(..., ge=0, description="Users who reached the goal event")

    @model_validator(mode="after")
    def check_conversions_within_views(self):
        if self.conversions > self.views:
            raise ValueError(
                f"Variant '{self.name}': conversions ({self.conversions}) exceed views ({self.views})"
            )
        return self

    def to_observation(self) -> VariantObservation:
        return VariantObservation(name=self.name, views=self.views, conversions=self.conversions)


class ExperimentCountsRequest(BaseModel):
    variants: List[VariantCountsRequest] = Field(
        ..., min_length=2, description="Control first, then the treatments"
    )

    def to_observations(self) -> List[VariantObservation]:
        return [variant.to_observation() for variant in self.variants]
