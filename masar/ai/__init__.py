"""AI content generation for career roadmaps."""
