from labmatch.pipeline.analyzer import Analyzer, build_analyzer
from labmatch.pipeline.models import AnalysisReport, ResultSet

__all__ = ["AnalysisReport", "Analyzer", "ResultSet", "build_analyzer"]
