"""Display metadata for every entity type.

A closed lookup table keyed by ``EntityType``; a missing entry is caught at
import time rather than when a node of that type is first drawn.
"""

from dataclasses import dataclass
from typing import Literal

from entity_topology.models.entity import EntityType

EntityCategory = Literal["governance", "vulnerability", "disaster-recovery", "core"]


@dataclass(frozen=True)
class EntityTypeConfig:
    """Visual presentation metadata for an entity type."""

    icon: str
    label: str
    color: str  # CSS custom property name
    category: EntityCategory

    @property
    def css_color(self) -> str:
        return f"var({self.color})"


ENTITY_TYPE_CONFIG: dict[EntityType, EntityTypeConfig] = {
    EntityType.CONTROL: EntityTypeConfig("🛡️", "Control", "--accent", "governance"),
    EntityType.RISK: EntityTypeConfig("⚠️", "Risk", "--warning", "governance"),
    EntityType.FRAMEWORK: EntityTypeConfig("📋", "Framework", "--chart-series-3", "governance"),
    EntityType.POLICY: EntityTypeConfig("📜", "Policy", "--chart-series-4", "governance"),
    EntityType.METRIC: EntityTypeConfig("📊", "Metric", "--text-muted", "core"),
    EntityType.STANDARD: EntityTypeConfig("📐", "Standard", "--chart-series-2", "governance"),
    EntityType.VENDOR: EntityTypeConfig("🏢", "Vendor", "--chart-series-1", "core"),
    EntityType.ASSET: EntityTypeConfig("💻", "Asset", "--text-muted", "core"),
    EntityType.FINDING: EntityTypeConfig("🔍", "Finding", "--severity-medium", "governance"),
    EntityType.PERSON: EntityTypeConfig("👤", "Person", "--text-muted", "core"),
    EntityType.TEAM: EntityTypeConfig("👥", "Team", "--text-muted", "core"),
    EntityType.PROCESS: EntityTypeConfig("⚙️", "Process", "--text-muted", "core"),
    EntityType.VULNERABILITY: EntityTypeConfig(
        "🔓", "Vulnerability", "--severity-high", "vulnerability"
    ),
    EntityType.CVE: EntityTypeConfig("🐛", "CVE", "--severity-high", "vulnerability"),
    EntityType.PATCH: EntityTypeConfig("🩹", "Patch", "--chart-series-2", "vulnerability"),
    EntityType.EXPLOIT: EntityTypeConfig("💥", "Exploit", "--severity-critical", "vulnerability"),
    EntityType.AFFECTED_ASSET: EntityTypeConfig(
        "🎯", "Affected Asset", "--severity-high", "vulnerability"
    ),
    EntityType.SCAN: EntityTypeConfig("🔬", "Scan", "--chart-series-3", "vulnerability"),
    EntityType.SLA_POLICY: EntityTypeConfig("📋", "SLA Policy", "--chart-series-4", "vulnerability"),
    EntityType.REMEDIATION_GROUP: EntityTypeConfig(
        "📦", "Remediation Group", "--chart-series-1", "vulnerability"
    ),
    EntityType.RECOVERY_PLAN: EntityTypeConfig(
        "🔄", "Recovery Plan", "--accent-strong", "disaster-recovery"
    ),
    EntityType.RTO_RPO_TARGET: EntityTypeConfig(
        "⏱️", "RTO/RPO Target", "--chart-series-2", "disaster-recovery"
    ),
    EntityType.BC_SCENARIO: EntityTypeConfig(
        "📋", "BC Scenario", "--chart-series-3", "disaster-recovery"
    ),
    EntityType.TEST_EXERCISE: EntityTypeConfig(
        "🧪", "Test Exercise", "--chart-series-4", "disaster-recovery"
    ),
    EntityType.DEPENDENCY: EntityTypeConfig(
        "🔗", "Dependency", "--chart-series-2", "disaster-recovery"
    ),
    EntityType.CRITICAL_PROCESS: EntityTypeConfig(
        "⚡", "Critical Process", "--severity-high", "disaster-recovery"
    ),
    EntityType.RECOVERY_TEAM: EntityTypeConfig(
        "👥", "Recovery Team", "--chart-series-1", "disaster-recovery"
    ),
    EntityType.ALTERNATE_SITE: EntityTypeConfig(
        "🏢", "Alternate Site", "--chart-series-3", "disaster-recovery"
    ),
    EntityType.COMMUNICATION_PLAN: EntityTypeConfig(
        "📞", "Communication Plan", "--chart-series-4", "disaster-recovery"
    ),
    EntityType.ESCALATION_TIER: EntityTypeConfig(
        "📈", "Escalation Tier", "--warning", "disaster-recovery"
    ),
    EntityType.VITAL_RECORD: EntityTypeConfig(
        "📄", "Vital Record", "--accent", "disaster-recovery"
    ),
    EntityType.CRISIS_ACTION: EntityTypeConfig(
        "🚨", "Crisis Action", "--severity-critical", "disaster-recovery"
    ),
}

_missing = set(EntityType) - set(ENTITY_TYPE_CONFIG)
if _missing:
    raise RuntimeError(f"Entity types without display config: {sorted(t.value for t in _missing)}")


def type_color(entity_type: EntityType) -> str:
    """CSS colour expression for an entity type."""
    return ENTITY_TYPE_CONFIG[entity_type].css_color


def type_caption(entity_type: EntityType) -> str:
    """Raw type value with underscores shown as spaces (e.g. ``affected asset``)."""
    return entity_type.value.replace("_", " ")
