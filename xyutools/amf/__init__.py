"""AMF3 encoding and decoding."""