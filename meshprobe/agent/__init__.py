from .runner import (
    MeshProbeAgent as MeshProbeAgent,
    create_discovery as create_discovery,
    main as main,
    run_agent as run_agent,
)
