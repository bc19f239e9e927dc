"""Services: batch inference stub."""
from unified_pipeline.services.inference import BatchResult, InferenceStub, build_target_audio, demo_target_audio

__all__ = ["BatchResult", "InferenceStub", "build_target_audio", "demo_target_audio"]
