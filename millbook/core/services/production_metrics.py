"""
Shift metrics and advisory alerts.

Pure functions; nothing here touches storage.
"""

from datetime import datetime, time, timedelta

from millbook.config.settings import ThresholdSettings
from millbook.core.entities.production import (
    AlertKind,
    ProductionAlert,
    ProductionEntry,
    ProductionMetrics,
)

_DAY = timedelta(days=1)


def compute_runtime_minutes(start_time: time, end_time: time, breakdown_minutes: int) -> int:
    """
    Minutes between start and end less breakdown.

    An end time earlier than the start is taken to be on the next day.
    """
    anchor = datetime(2000, 1, 1)
    start = datetime.combine(anchor, start_time)
    end = datetime.combine(anchor, end_time)
    if end < start:
        end += _DAY
    elapsed = int((end - start).total_seconds() // 60)
    return elapsed - breakdown_minutes


def compute_metrics(
    raw_consumed_kg: float,
    oil_produced_kg: float,
    cake_produced_kg: float,
    runtime_minutes: int,
) -> ProductionMetrics:
    """Yield, loss and throughput for one shift."""
    if raw_consumed_kg > 0:
        oil_yield = oil_produced_kg / raw_consumed_kg * 100
        cake_yield = cake_produced_kg / raw_consumed_kg * 100
    else:
        oil_yield = 0.0
        cake_yield = 0.0

    total_accounted = oil_yield + cake_yield
    process_loss = 100 - total_accounted if raw_consumed_kg > 0 else 0.0
    oil_per_hour = oil_produced_kg / runtime_minutes * 60 if runtime_minutes > 0 else 0.0

    return ProductionMetrics(
        runtime_minutes=runtime_minutes,
        oil_yield_percent=oil_yield,
        cake_yield_percent=cake_yield,
        total_accounted_percent=total_accounted,
        process_loss_percent=process_loss,
        oil_per_hour=oil_per_hour,
    )


def evaluate_alerts(
    entry: ProductionEntry,
    thresholds: ThresholdSettings,
) -> list[ProductionAlert]:
    """Advisory alerts for an accepted shift. Never blocks the entry."""
    alerts: list[ProductionAlert] = []

    if entry.oil_yield_percent < thresholds.min_oil_yield:
        alerts.append(
            ProductionAlert(
                kind=AlertKind.LOW_OIL_YIELD,
                value=entry.oil_yield_percent,
                threshold=thresholds.min_oil_yield,
                message=f"LOW YIELD: {entry.oil_yield_percent:.1f}%",
            )
        )
    if entry.process_loss_percent > thresholds.max_process_loss:
        alerts.append(
            ProductionAlert(
                kind=AlertKind.HIGH_PROCESS_LOSS,
                value=entry.process_loss_percent,
                threshold=thresholds.max_process_loss,
                message=f"HIGH LOSS: {entry.process_loss_percent:.1f}%",
            )
        )
    if entry.breakdown_minutes > thresholds.max_breakdown_minutes:
        alerts.append(
            ProductionAlert(
                kind=AlertKind.LONG_BREAKDOWN,
                value=entry.breakdown_minutes,
                threshold=thresholds.max_breakdown_minutes,
                message=f"LONG BREAKDOWN: {entry.breakdown_minutes}m",
            )
        )
    if entry.runtime_minutes < thresholds.min_runtime_minutes:
        alerts.append(
            ProductionAlert(
                kind=AlertKind.SHORT_RUNTIME,
                value=entry.runtime_minutes,
                threshold=thresholds.min_runtime_minutes,
                message=f"SHORT RUNTIME: {entry.runtime_minutes}m",
            )
        )

    return alerts
