"""
Analysis engine implementations, one per content category.

Each engine extends BaseAnalysisEngine and provides:
- A unique engine_id used in logs
- The category it answers for
- Its own system and user prompts
"""

from contentintel.features.implementations.news_engine import NewsVerificationEngine
from contentintel.features.implementations.tool_auditor import ToolAuditor
from contentintel.features.implementations.media_forensics import MediaForensicsEngine
from contentintel.features.implementations.audio_intelligence import AudioIntelligenceEngine

ALL_ENGINE_CLASSES = [
    NewsVerificationEngine,
    ToolAuditor,
    MediaForensicsEngine,
    AudioIntelligenceEngine,
]

__all__ = [
    "NewsVerificationEngine",
    "ToolAuditor",
    "MediaForensicsEngine",
    "AudioIntelligenceEngine",
    "ALL_ENGINE_CLASSES",
]
