"""Return preparation pipeline: stage registry, projections and board orchestration."""
