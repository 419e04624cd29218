"""
Profile Picture Storage

- 업로드 이미지 압축 (최대 300px, 0.2MB 이하 JPEG)
- Supabase Storage profile_pictures 버킷: {member_id}/profile.{ext}
"""
from io import BytesIO
from typing import List, Optional, Tuple

from loguru import logger
from PIL import Image, UnidentifiedImageError

from app.config import StoreBackend, get_settings
from app.errors import StoreError, ValidationError


# JPEG 품질 단계 (용량 초과 시 순서대로 낮춤)
JPEG_QUALITY_STEPS = (85, 75, 65, 55, 45, 35)
MIN_DIMENSION = 32


def _encode_within(img: Image.Image, max_bytes: int) -> bytes:
    """품질을 낮춰가며 JPEG 인코딩 (max_bytes 이하가 되면 중단)"""
    data = b""
    for quality in JPEG_QUALITY_STEPS:
        buffer = BytesIO()
        img.save(buffer, format="JPEG", quality=quality, optimize=True)
        data = buffer.getvalue()
        if len(data) <= max_bytes:
            break
    return data


def compress_image(content: bytes, max_dimension: int, max_bytes: int) -> Tuple[bytes, str]:
    """
    이미지 축소 + 재인코딩

    Returns:
        (압축된 바이트, content-type)

    Raises:
        ValidationError: 이미지로 읽을 수 없는 파일
    """
    try:
        img = Image.open(BytesIO(content))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError("Uploaded file is not a valid image") from e

    img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    while True:
        data = _encode_within(img, max_bytes)
        if len(data) <= max_bytes or max(img.size) <= MIN_DIMENSION:
            break
        # 최저 품질로도 초과하면 해상도를 줄여서 재시도
        img = img.resize(
            (max(1, int(img.width * 0.8)), max(1, int(img.height * 0.8))),
            Image.Resampling.LANCZOS
        )

    logger.debug(f"이미지 압축: {len(content)} → {len(data)} bytes ({img.width}x{img.height})")
    return data, "image/jpeg"


class ProfilePictureStorage:
    """회원별 프로필 사진 폴더 관리"""

    def __init__(self, client, bucket: str):
        self.client = client
        self.bucket = bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def _list_files(self, member_id: str) -> List[str]:
        entries = self._bucket().list(member_id) or []
        return [f"{member_id}/{entry['name']}" for entry in entries if entry.get("name")]

    def find_existing(self, member_id: str) -> Optional[str]:
        """기존 프로필 사진 공개 URL (없으면 None)"""
        try:
            files = self._list_files(member_id)
        except Exception as e:
            raise StoreError(f"Failed to list profile pictures: {e}") from e

        if not files:
            return None
        return self._bucket().get_public_url(files[0])

    def replace(self, member_id: str, data: bytes, ext: str, content_type: str) -> str:
        """
        기존 파일 삭제 후 업로드

        Returns:
            새 공개 URL
        """
        path = f"{member_id}/profile.{ext}"
        try:
            old_files = self._list_files(member_id)
            if old_files:
                self._bucket().remove(old_files)
                logger.info(f"기존 프로필 사진 삭제: {len(old_files)}개 ({member_id})")

            self._bucket().upload(
                path,
                data,
                {"content-type": content_type, "upsert": "true"}
            )
            public_url = self._bucket().get_public_url(path)
        except Exception as e:
            logger.error(f"프로필 사진 업로드 오류: {e}")
            raise StoreError(f"Failed to upload profile picture: {e}") from e

        return public_url


def get_avatar_storage() -> Optional[ProfilePictureStorage]:
    """Supabase 백엔드일 때만 사용 (메모리 백엔드는 None)"""
    settings = get_settings()
    if settings.STORE_BACKEND == StoreBackend.MEMORY:
        return None

    from database.supabase_client import get_supabase_client
    return ProfilePictureStorage(get_supabase_client(), settings.PROFILE_PICTURE_BUCKET)
