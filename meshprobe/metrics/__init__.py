from .prometheus_metrics import PrometheusMetrics as PrometheusMetrics
from .sink import MetricsSink as MetricsSink
