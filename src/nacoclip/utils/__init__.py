from nacoclip.utils.data_uri import decode_data_uri, encode_data_uri, essence, guess_mime, primary_type
from nacoclip.utils.file_manager import FileManager

__all__ = [
    'FileManager',
    'decode_data_uri',
    'encode_data_uri',
    'essence',
    'guess_mime',
    'primary_type',
]
