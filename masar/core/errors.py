"""Domain exceptions raised by the service layer."""


class MasarError(Exception):
    """Base class for service-layer errors."""


class UserNotFoundError(MasarError):
    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class RoadmapExistsError(MasarError):
    def __init__(self, user_id: int):
        super().__init__("User already has a career roadmap")
        self.user_id = user_id


class RoadmapParseError(MasarError, ValueError):
    """AI response did not contain the expected roadmap JSON."""


class RoadmapGenerationError(MasarError):
    """Content generation failed and the roadmap shell was discarded."""

    def __init__(self, roadmap_id: int, role: str):
        super().__init__("Failed to generate roadmap content")
        self.roadmap_id = roadmap_id
        self.role = role
