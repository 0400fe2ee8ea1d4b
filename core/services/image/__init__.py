from core.services.image.service import InlineExecutor, TaskImageService

__all__ = ["InlineExecutor", "TaskImageService"]
