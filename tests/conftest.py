import socket
import threading

import pytest


class ScriptedFTPServer:
    """
    Single-client FTP server for tests, bound to 127.0.0.1 on an ephemeral port.

    Files live in memory in `files`; every raw command line received is kept
    in `received`. `pasv_reply` replaces the PASV reply when set.
    """

    def __init__(self, password="secret", listing="-rw-r--r-- 1 ftp ftp 5 notes.txt\r\n"):
        self.password = password
        self.listing = listing
        self.files = {}
        self.received = []
        self.cwd = "/"
        self.pasv_reply = None
        self._pasv_sock = None
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self.host, self.port = self._sock.getsockname()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self):
        self._thread.start()
        return self

    def stop(self):
        self._sock.close()
        self._close_pasv()
        self._thread.join(timeout=5)

    def _close_pasv(self):
        if self._pasv_sock is not None:
            self._pasv_sock.close()
            self._pasv_sock = None

    def _accept_data(self):
        self._pasv_sock.settimeout(5)
        data_sock, _ = self._pasv_sock.accept()
        self._close_pasv()
        return data_sock

    def _serve(self):
        try:
            client, _ = self._sock.accept()
        except OSError:
            return
        with client:
            reader = client.makefile('rb')
            client.sendall(b"220 Scripted FTP ready\r\n")
            while True:
                raw = reader.readline()
                if not raw:
                    break
                self.received.append(raw)
                line = raw.decode('utf-8').rstrip('\r\n')
                verb, _, arg = line.partition(' ')
                handler = getattr(self, f"_cmd_{verb.lower()}", None)
                if handler is None:
                    client.sendall(b"502 Command not implemented\r\n")
                    continue
                if handler(client, arg) is False:
                    break
        self._close_pasv()

    def _cmd_user(self, client, arg):
        client.sendall(b"331 Please specify the password\r\n")

    def _cmd_pass(self, client, arg):
        if arg == self.password:
            client.sendall(b"230 Login successful\r\n")
        else:
            client.sendall(b"530 Login incorrect\r\n")

    def _cmd_type(self, client, arg):
        client.sendall(f"200 Switching to {arg} mode\r\n".encode())

    def _cmd_pasv(self, client, arg):
        if self.pasv_reply is not None:
            client.sendall(self.pasv_reply.encode() + b"\r\n")
            return
        self._close_pasv()
        self._pasv_sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._pasv_sock.bind(("127.0.0.1", 0))
        self._pasv_sock.listen(1)
        port = self._pasv_sock.getsockname()[1]
        reply = f"227 Entering Passive Mode (127,0,0,1,{port >> 8},{port & 0xFF}).\r\n"
        client.sendall(reply.encode())

    def _cmd_list(self, client, arg):
        data_sock = self._accept_data()
        client.sendall(b"150 Here comes the directory listing\r\n")
        with data_sock:
            data_sock.sendall(self.listing.encode('utf-8'))
        client.sendall(b"226 Directory send OK\r\n")

    def _cmd_retr(self, client, arg):
        if arg not in self.files:
            self._close_pasv()
            client.sendall(b"550 Failed to open file\r\n")
            return
        data_sock = self._accept_data()
        client.sendall(f"150 Opening BINARY mode data connection for {arg}\r\n".encode())
        with data_sock:
            data_sock.sendall(self.files[arg])
        client.sendall(b"226 Transfer complete\r\n")

    def _cmd_stor(self, client, arg):
        data_sock = self._accept_data()
        client.sendall(b"150 Ok to send data\r\n")
        chunks = []
        with data_sock:
            while True:
                chunk = data_sock.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        self.files[arg] = b''.join(chunks)
        client.sendall(b"226 Transfer complete\r\n")

    def _cmd_cwd(self, client, arg):
        self.cwd = "/" + arg
        client.sendall(b"250 Directory successfully changed\r\n")

    def _cmd_pwd(self, client, arg):
        client.sendall(f'257 "{self.cwd}" is the current directory\r\n'.encode())

    def _cmd_syst(self, client, arg):
        client.sendall(b"215 UNIX Type: L8\r\n")

    def _cmd_quit(self, client, arg):
        client.sendall(b"221 Goodbye\r\n")
        return False


@pytest.fixture
def ftp_server():
    server = ScriptedFTPServer().start()
    yield server
    server.stop()


@pytest.fixture
def closed_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
