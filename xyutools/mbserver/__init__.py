"""Modbus slave: frames, function handlers and a TCP/RTU server."""