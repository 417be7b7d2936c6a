from .prediction import PredictionService

__all__ = ["PredictionService"]
