"""
Audio payload helpers.

The synthesis model answers with raw 16-bit little-endian PCM inside a data
URI. Browsers cannot play that directly, so it is wrapped into a RIFF/WAVE
container before being handed back.
"""

import base64
import binascii
import io
import re
import wave
from typing import Tuple

from interview_coach.core.errors import AudioFormatError

DEFAULT_CHANNELS = 1
DEFAULT_SAMPLE_RATE = 24000
DEFAULT_SAMPLE_WIDTH = 2

WAV_HEADER_SIZE = 44
WAV_MIME_TYPE = 'audio/wav'


def pcm_to_wav(pcm_data: bytes, channels: int = DEFAULT_CHANNELS, sample_rate: int = DEFAULT_SAMPLE_RATE,
               sample_width: int = DEFAULT_SAMPLE_WIDTH) -> bytes:
    """Wrap raw PCM frames into a WAV container."""
    block_align = channels * sample_width
    if len(pcm_data) % block_align:
        raise AudioFormatError(
            f"PCM payload of {len(pcm_data)} bytes is not a whole number of {block_align}-byte frames"
        )

    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sample_width)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm_data)
    return buffer.getvalue()


def to_data_uri(mime_type: str, data: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """Split a base64 data URI into its MIME type (with parameters) and bytes."""
    if not uri or not uri.startswith('data:') or ',' not in uri:
        raise AudioFormatError("Audio payload is not a data URI")

    header, _, payload = uri.partition(',')
    mime_type = header[len('data:'):]
    if mime_type.endswith(';base64'):
        mime_type = mime_type[:-len(';base64')]

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AudioFormatError(f"Audio payload is not valid base64: {e}") from e
    return mime_type, data


def sample_rate_from_mime(mime_type: str, default: int = DEFAULT_SAMPLE_RATE) -> int:
    """Read `rate=` from e.g. 'audio/L16;codec=pcm;rate=24000'."""
    match = re.search(r'rate=(\d+)', mime_type or '')
    return int(match.group(1)) if match else default


def wav_data_uri_from_pcm_uri(pcm_uri: str) -> str:
    """Turn the synthesis model's PCM data URI into a playable WAV data URI."""
    mime_type, pcm = parse_data_uri(pcm_uri)
    wav_bytes = pcm_to_wav(pcm, sample_rate=sample_rate_from_mime(mime_type))
    return to_data_uri(WAV_MIME_TYPE, wav_bytes)
