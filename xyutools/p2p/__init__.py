"""Platform agent protocol: JSON messages, a TCP client and text/path helpers."""