"""HTTP control server for jogserver.

Serves the phone control page and the ``/send`` command endpoint, and
owns the single-instance replacement handshake on the control port.
"""
