"""Aggregation of detector reports into a single verdict."""

from typing import Sequence

from median.models.anomaly_report import AggregatedAnomalyVerdict, AnomalyReport


def aggregate(reports: Sequence[AnomalyReport]) -> AggregatedAnomalyVerdict:
    """Union detector reports into one verdict.

    Findings are concatenated in report order; severity is the maximum
    report severity (0.0 when there are no reports). Confidence does not
    weight the severity.
    """
    findings = tuple(finding for report in reports for finding in report.anomalies)
    return AggregatedAnomalyVerdict(
        has_anomalies=any(report.has_anomalies for report in reports),
        severity=max((report.severity for report in reports), default=0.0),
        findings=findings,
        reports=tuple(reports),
    )
