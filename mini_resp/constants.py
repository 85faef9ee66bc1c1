"""Constants for RESP request encoding.

RESPのマルチバルク形式で使うプレフィックスや区切り文字、
出力バッファの既定値をまとめています。
"""

# RESP protocol constants
CRLF = b"\r\n"
ASTERISK_BYTE = b"*"
DOLLAR_BYTE = b"$"

# 引数の文字列は UTF-8 でバイト列に変換する
CHARSET = "utf-8"

# キャプチャ結果は1バイト=1文字でデコードする
CAPTURE_CHARSET = "iso-8859-1"

# Output buffer
DEFAULT_BUFFER_SIZE = 8192

# Float bounds
POSITIVE_INFINITY_BYTES = b"+inf"
NEGATIVE_INFINITY_BYTES = b"-inf"

# Integer ranges
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1
