# Scoring stages module
from .stage1_gate import SkillGateStage
from .stage2_schedule import ScheduleOverlapStage
from .stage3_scoring import CompatibilityScoringStage
