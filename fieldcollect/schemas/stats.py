"""
Stats schemas

Field names on the wire are fixed: totalRecords, recordsPerAgent
[{agentId, agentName, count}], recordsByPeriod [{date, count}].
"""
import enum
from typing import List

from fieldcollect.schemas.common import CamelModel


class StatsPeriod(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class AgentCount(CamelModel):
    agent_id: int
    agent_name: str
    count: int


class PeriodCount(CamelModel):
    date: str
    count: int


class StatsOut(CamelModel):
    total_records: int
    records_per_agent: List[AgentCount]
    records_by_period: List[PeriodCount]
