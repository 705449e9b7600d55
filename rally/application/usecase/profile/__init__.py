"""Profile use cases."""

from .get_profile import GetProfileUseCase
from .update_profile import UpdateProfileUseCase
from .upload_avatar import UploadAvatarUseCase

__all__ = ["GetProfileUseCase", "UpdateProfileUseCase", "UploadAvatarUseCase"]
