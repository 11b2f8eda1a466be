"""
meshprobe - mesh reachability and latency prober.

Every node runs an agent that probes each known peer over UDP echo,
TCP (HTTP readiness) and DNS, and exports pass/fail results with timings
to Prometheus.
"""
