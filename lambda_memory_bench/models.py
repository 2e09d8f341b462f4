"""Data models for the Lambda memory benchmark."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Sequence


@dataclass(frozen=True)
class Sample:
    """One classified HTTP trial result."""

    duration_ms: float
    is_cold_start: bool
    memory_mb: int
    request_id: str
    timestamp: str
    request_number: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requestNumber": self.request_number,
            "duration": self.duration_ms,
            "memoryMB": self.memory_mb,
            "requestId": self.request_id,
            "isColdStart": self.is_cold_start,
            "timestamp": self.timestamp,
        }


@dataclass
class TrialSet:
    """Cold and warm samples collected for a single memory tier.

    Each sequence is capped at its target; samples arriving after a class is
    full are rejected by :meth:`add` and never stored.
    """

    target_cold: int
    target_warm: int
    cold_samples: List[Sample] = field(default_factory=list)
    warm_samples: List[Sample] = field(default_factory=list)

    def add(self, sample: Sample) -> bool:
        """Store the sample if its class is still under target."""
        if sample.is_cold_start:
            if len(self.cold_samples) < self.target_cold:
                self.cold_samples.append(sample)
                return True
            return False

        if len(self.warm_samples) < self.target_warm:
            self.warm_samples.append(sample)
            return True
        return False

    @property
    def needs_cold(self) -> bool:
        return len(self.cold_samples) < self.target_cold

    @property
    def needs_warm(self) -> bool:
        return len(self.warm_samples) < self.target_warm

    @property
    def is_complete(self) -> bool:
        return not self.needs_cold and not self.needs_warm


@dataclass(frozen=True)
class Stats:
    """Summary statistics for one class of samples."""

    count: int
    average: float
    min: float
    max: float

    @classmethod
    def from_durations(cls, durations: Sequence[float]) -> Optional["Stats"]:
        """Reduce durations to stats; an empty sequence has no stats at all."""
        if not durations:
            return None

        return cls(
            count=len(durations),
            average=sum(durations) / len(durations),
            min=min(durations),
            max=max(durations),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "average": self.average, "min": self.min, "max": self.max}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Stats"]:
        if not data:
            return None
        return cls(
            count=data["count"],
            average=data["average"],
            min=data.get("min", data["average"]),
            max=data.get("max", data["average"]),
        )


@dataclass(frozen=True)
class AggregatedResult:
    """Per-tier collection outcome."""

    memory_mb: int
    warm_stats: Optional[Stats] = None
    cold_stats: Optional[Stats] = None
    requests_attempted: int = 0
    errors: int = 0

    @classmethod
    def from_trial_set(
        cls, memory_mb: int, trial_set: TrialSet, requests_attempted: int = 0, errors: int = 0
    ) -> "AggregatedResult":
        return cls(
            memory_mb=memory_mb,
            warm_stats=Stats.from_durations([s.duration_ms for s in trial_set.warm_samples]),
            cold_stats=Stats.from_durations([s.duration_ms for s in trial_set.cold_samples]),
            requests_attempted=requests_attempted,
            errors=errors,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "memoryMB": self.memory_mb,
            "warmStart": self.warm_stats.to_dict() if self.warm_stats else None,
            "coldStart": self.cold_stats.to_dict() if self.cold_stats else None,
            "requestsAttempted": self.requests_attempted,
            "errors": self.errors,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AggregatedResult":
        return cls(
            memory_mb=data["memoryMB"],
            warm_stats=Stats.from_dict(data.get("warmStart")),
            cold_stats=Stats.from_dict(data.get("coldStart")),
            requests_attempted=data.get("requestsAttempted", 0),
            errors=data.get("errors", 0),
        )


@dataclass(frozen=True)
class CostMetrics:
    """Cost figures derived for one tier under a pricing configuration."""

    memory_mb: int
    avg_execution_time: float
    cold_start_time: Optional[float]
    cost_per_1m_warm: float
    cost_per_1m_cold: float
    blended_cost_per_1m: float
    cost_efficiency_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "memoryMB": self.memory_mb,
            "avgExecutionTime": self.avg_execution_time,
            "coldStartTime": self.cold_start_time,
            "costPer1MInvocations": self.cost_per_1m_warm,
            "coldStartCostPer1M": self.cost_per_1m_cold,
            "blendedCostPer1M": self.blended_cost_per_1m,
            "costEfficiencyScore": self.cost_efficiency_score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CostMetrics":
        return cls(
            memory_mb=data["memoryMB"],
            avg_execution_time=data["avgExecutionTime"],
            cold_start_time=data.get("coldStartTime"),
            cost_per_1m_warm=data["costPer1MInvocations"],
            cost_per_1m_cold=data.get("coldStartCostPer1M", 0),
            blended_cost_per_1m=data["blendedCostPer1M"],
            cost_efficiency_score=data["costEfficiencyScore"],
        )


@dataclass(frozen=True)
class CostEfficiencyAnalysis:
    """Cost table for one workload family, sorted by memory ascending."""

    most_cost_efficient: CostMetrics
    least_cost_efficient: CostMetrics
    all_configurations: List[CostMetrics]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mostCostEfficient": self.most_cost_efficient.to_dict(),
            "leastCostEfficient": self.least_cost_efficient.to_dict(),
            "allConfigurations": [c.to_dict() for c in self.all_configurations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CostEfficiencyAnalysis":
        return cls(
            most_cost_efficient=CostMetrics.from_dict(data["mostCostEfficient"]),
            least_cost_efficient=CostMetrics.from_dict(data["leastCostEfficient"]),
            all_configurations=[CostMetrics.from_dict(c) for c in data["allConfigurations"]],
        )


@dataclass(frozen=True)
class OptimalConfig:
    """The recommended memory tier for one workload family."""

    memory_mb: int
    warm_start_avg: float
    cold_start_avg: Optional[float]
    blended_cost: float
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "memoryMB": self.memory_mb,
            "warmStartAvg": self.warm_start_avg,
            "coldStartAvg": self.cold_start_avg,
            "blendedCost": self.blended_cost,
            "recommendation": self.recommendation,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["OptimalConfig"]:
        if not data:
            return None
        return cls(
            memory_mb=data["memoryMB"],
            warm_start_avg=data["warmStartAvg"],
            cold_start_avg=data.get("coldStartAvg"),
            blended_cost=data["blendedCost"],
            recommendation=data.get("recommendation", ""),
        )


@dataclass
class Summary:
    """Combined analysis across workload families."""

    total_functions_tested: int = 0
    optimal_configurations: Dict[str, Optional[OptimalConfig]] = field(default_factory=dict)
    cost_efficiency: Dict[str, CostEfficiencyAnalysis] = field(default_factory=dict)
    insights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFunctionsTested": self.total_functions_tested,
            "optimalMemoryConfigurations": {
                family: config.to_dict() if config else None
                for family, config in self.optimal_configurations.items()
            },
            "costEfficiencyAnalysis": {
                family: analysis.to_dict() for family, analysis in self.cost_efficiency.items()
            },
            "performanceInsights": list(self.insights),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Summary":
        return cls(
            total_functions_tested=data.get("totalFunctionsTested", 0),
            optimal_configurations={
                family: OptimalConfig.from_dict(config)
                for family, config in data.get("optimalMemoryConfigurations", {}).items()
            },
            cost_efficiency={
                family: CostEfficiencyAnalysis.from_dict(analysis)
                for family, analysis in data.get("costEfficiencyAnalysis", {}).items()
            },
            insights=list(data.get("performanceInsights", [])),
        )


@dataclass
class BenchmarkResults:
    """Complete benchmark run: raw per-family results plus the derived summary."""

    timestamp: str
    families: Dict[str, List[AggregatedResult]] = field(default_factory=dict)
    summary: Summary = field(default_factory=Summary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "families": {
                family: [r.to_dict() for r in results] for family, results in self.families.items()
            },
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BenchmarkResults":
        return cls(
            timestamp=data["timestamp"],
            families={
                family: [AggregatedResult.from_dict(r) for r in results]
                for family, results in data.get("families", {}).items()
            },
            summary=Summary.from_dict(data.get("summary", {})),
        )
