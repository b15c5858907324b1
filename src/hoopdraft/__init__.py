"""All-time franchise draft: roster snapshot pipeline and lineup scoring."""
