from splitstats.models.schemas import ExperimentCountsRequest, VariantCountsRequest

__all__ = ["ExperimentCountsRequest", "VariantCountsRequest"]
