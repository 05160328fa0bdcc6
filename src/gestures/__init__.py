"""
MouseGest Gestures Module

Pointer state machine, pattern extraction and gesture matching.
"""
from .config import Config, ConfigError, GestureConfig, load_config
from .matcher import Matcher, MatchResult, match_pattern
from .pattern import PatternExtractor, PatternStatus, extract_pattern
from .pipeline import GesturePipeline, PipelineListener
from .pointer import MachineState, PointerListener, PointerSample, PointerStateMachine, SampleKind
from .types import GestureRecord, MatchingAlgorithm, MouseButton, SuppressionKey
from .worker import GestureWorker, GestureEvent

__all__ = [
    'Config',
    'ConfigError',
    'GestureConfig',
    'load_config',
    'Matcher',
    'MatchResult',
    'match_pattern',
    'PatternExtractor',
    'PatternStatus',
    'extract_pattern',
    'GesturePipeline',
    'PipelineListener',
    'MachineState',
    'PointerListener',
    'PointerSample',
    'PointerStateMachine',
    'SampleKind',
    'GestureRecord',
    'MatchingAlgorithm',
    'MouseButton',
    'SuppressionKey',
    'GestureWorker',
    'GestureEvent',
]
