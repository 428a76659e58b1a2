"""HTTP client for communicating with the file gateway."""

import sys
import time
import uuid
from pathlib import Path
from typing import Iterator, Optional
from urllib.parse import quote

import httpx

from common.checksum import IncrementalDigest
from common.constants import (
    API_PREFIX,
    CODE_INVALID_TICKET,
    CODE_NOT_FOUND,
    CODE_OK,
    CODE_PAYLOAD_TOO_LARGE,
    CODE_STORE_FAILURE
)
from common.logging_config import get_logger
from cli.config import Config
from cli.constants import DOWNLOADS_DIR, GREEN, RESET
from cli.utils import format_file_size, format_timestamp, local_filename, split_capabilities

logger = get_logger(__name__)


class GatewayError(Exception):
    """Raised when the gateway answers with a non-zero code or an HTTP error."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class GatewayClient:
    """HTTP client for the gateway API with retry logic and error handling."""

    def __init__(self, config: Config):
        """
        Initialize gateway client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized GatewayClient [base_url={config.get_base_url()}]")

    def _calculate_upload_timeout(self, file_size: int) -> float:
        """
        Calculate timeout for upload based on file size.

        Args:
            file_size: File size in bytes

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        base_timeout = 30.0
        size_mb = file_size / (1024 * 1024)
        return base_timeout + size_mb * 0.1

    def _file_endpoint(self, file_id: str, suffix: str = "") -> str:
        return f"{API_PREFIX}/files/{quote(file_id, safe='')}{suffix}"

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic on 5xx errors and network failures.

        Args:
            method: HTTP method (GET, POST, PUT)
            endpoint: API endpoint path or absolute URL
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        last_exception = None

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})
        kwargs['headers']['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)

                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )

                if response.status_code >= 500 and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} status={response.status_code}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"Network error (max retries exceeded): {method} {endpoint} error={e} [request_id={self.request_id}]"
                    )

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Gateway may be overloaded.")
        raise ConnectionError("Cannot connect to file gateway. Is it running?")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map gateway error codes and HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            body = response.json()
            code = body.get('code')
            message = body.get('message', 'Unknown error')
        except ValueError:
            code = None
            message = response.text or 'Unknown error'

        error_messages = {
            CODE_NOT_FOUND: 'File not found on gateway.',
            CODE_INVALID_TICKET: 'Upload ticket rejected. Request a new upload address and retry.',
            CODE_PAYLOAD_TOO_LARGE: 'File too large for the gateway.',
            CODE_STORE_FAILURE: 'Gateway failed to store the file.',
        }

        if code in error_messages:
            return error_messages[code]

        status_messages = {
            400: 'Bad request',
            403: 'Access forbidden',
            404: 'Not found',
            413: 'File too large',
            422: 'Invalid request',
            500: 'Server error',
            503: 'Service unavailable',
        }

        return status_messages.get(response.status_code, message)

    def _unwrap(self, response: httpx.Response):
        """
        Extract the data payload of a {code, data} envelope.

        Raises:
            GatewayError: If the HTTP status or the envelope code signals an error
        """
        if response.status_code != 200:
            raise GatewayError(self._format_error(response))

        try:
            body = response.json()
        except ValueError:
            raise GatewayError("Gateway returned a malformed response")

        code = body.get('code')
        if code != CODE_OK:
            raise GatewayError(self._format_error(response), code=code)
        return body.get('data')

    def info(self, file_id: str) -> str:
        """
        Show metadata of a file.

        Args:
            file_id: File id on the gateway

        Returns:
            Formatted metadata or error message
        """
        try:
            data = self._unwrap(self._request_with_retry('GET', self._file_endpoint(file_id)))
        except (ConnectionError, GatewayError) as e:
            return f"Error: {e}"

        return (
            f"{data['name']} (ID: {data['id']})\n"
            f"  Size: {format_file_size(data['size'])}\n"
            f"  Version: {data['version']}\n"
            f"  Created: {format_timestamp(data['create_time'])} by {data['creator_id']}\n"
            f"  Modified: {format_timestamp(data['modify_time'])} by {data['modifier_id']}"
        )

    def permission(self, file_id: str) -> str:
        """
        Show the capabilities granted on a file.

        Returns:
            Formatted capability list or error message
        """
        try:
            data = self._unwrap(
                self._request_with_retry('GET', self._file_endpoint(file_id, '/permission'))
            )
        except (ConnectionError, GatewayError) as e:
            return f"Error: {e}"

        user_id = data.pop('user_id')
        granted, denied = split_capabilities(data)

        lines = [f"Permissions of {user_id} on {file_id}:", f"  Granted: {', '.join(granted) or 'none'}"]
        if denied:
            lines.append(f"  Denied: {', '.join(denied)}")
        return '\n'.join(lines)

    def users(self, user_ids: list[str]) -> str:
        """
        Look up users by id.

        Returns:
            One line per user or error message
        """
        try:
            data = self._unwrap(
                self._request_with_retry(
                    'GET',
                    f"{API_PREFIX}/users",
                    params={'user_ids': ','.join(user_ids)}
                )
            )
        except (ConnectionError, GatewayError) as e:
            return f"Error: {e}"

        if not data:
            return "No users found."
        return '\n'.join(f"  - {user['name']} (ID: {user['id']})" for user in data)

    def upload(self, file_path: str, file_id: Optional[str] = None) -> str:
        """
        Upload a local file: prepare, address, PUT bytes, complete.

        Args:
            file_path: Local file to upload
            file_id: File id on the gateway (defaults to the file name)

        Returns:
            Formatted result message
        """
        path = Path(file_path)
        if not path.exists():
            return f"Error: File not found: {file_path}"
        if not path.is_file():
            return f"Error: Not a file: {file_path}"

        file_id = file_id or path.name
        file_size = path.stat().st_size

        try:
            digest_types = self._unwrap(
                self._request_with_retry('GET', self._file_endpoint(file_id, '/upload/prepare'))
            )['digest_types']
            logger.debug(f"Gateway digest types: {digest_types}")

            ticket = self._unwrap(
                self._request_with_retry('POST', self._file_endpoint(file_id, '/upload/address'))
            )

            headers = dict(ticket.get('headers') or {})
            headers['Content-Length'] = str(file_size)
            response = self.session.request(
                ticket.get('method', 'PUT'),
                ticket['url'],
                content=self._stream_with_progress(path, file_size),
                headers=headers,
                timeout=self._calculate_upload_timeout(file_size)
            )
            if response.status_code != 200:
                raise GatewayError(self._format_error(response))

            record = self._unwrap(
                self._request_with_retry(
                    'POST',
                    self._file_endpoint(file_id, '/upload/complete'),
                    json={'request': {'name': path.name}}
                )
            )

        except (ConnectionError, GatewayError) as e:
            return f"Error uploading {file_path}: {e}"
        except httpx.ConnectError:
            return f"Error uploading {file_path}: Cannot connect to file gateway"
        except httpx.TimeoutException:
            return f"Error uploading {file_path}: Upload timed out (file size: {format_file_size(file_size)})"

        logger.info(f"Uploaded {file_path} as {file_id} ({record['size']} bytes)")
        return f"Uploaded: {record['name']} (ID: {record['id']}, Size: {format_file_size(record['size'])})"

    def _stream_with_progress(self, path: Path, file_size: int) -> Iterator[bytes]:
        uploaded = 0
        with open(path, 'rb') as f:
            while True:
                piece = f.read(8192)
                if not piece:
                    break
                uploaded += len(piece)
                progress = (uploaded / file_size) * 100 if file_size else 100.0
                sys.stdout.write(
                    f"\rUploading {path.name}: {format_file_size(uploaded)} / {format_file_size(file_size)} ({GREEN}{progress:.1f}%{RESET})"
                )
                sys.stdout.flush()
                yield piece

        sys.stdout.write('\n')
        sys.stdout.flush()

    def _resolve_output(self, output_path: Optional[str], filename: str) -> Path:
        if output_path:
            output_file = Path(output_path)
            if output_file.is_dir():
                output_file = output_file / filename
        else:
            output_file = Path.cwd() / DOWNLOADS_DIR / filename

        output_file.parent.mkdir(parents=True, exist_ok=True)
        return output_file

    def download(self, file_id: str, output_path: Optional[str] = None) -> str:
        """
        Download a file and verify it against the digest the gateway issued.

        Args:
            file_id: File id on the gateway
            output_path: Destination file or directory (defaults to downloads/)

        Returns:
            Formatted result message
        """
        try:
            info = self._unwrap(
                self._request_with_retry('GET', self._file_endpoint(file_id, '/download'))
            )
        except (ConnectionError, GatewayError) as e:
            return f"Error: {e}"

        filename = local_filename(info['url'], file_id)
        output_file = self._resolve_output(output_path, filename)
        partial_file = output_file.with_name(output_file.name + '.part')

        try:
            calculator = IncrementalDigest(info['digest_type'])
            size = 0
            with self.session.stream('GET', info['url'], headers=info.get('headers') or {}) as response:
                if response.status_code != 200:
                    return f"Error downloading {file_id}: {self._format_error(response)}"
                with open(partial_file, 'wb') as f:
                    for piece in response.iter_bytes():
                        calculator.update(piece)
                        f.write(piece)
                        size += len(piece)

            actual = calculator.finalize()
            if actual != info['digest'].lower():
                partial_file.unlink()
                logger.error(f"Digest mismatch for {file_id}: expected {info['digest']}, got {actual}")
                return f"Error downloading {file_id}: {info['digest_type']} digest mismatch"

            partial_file.replace(output_file)

        except (ValueError, OSError) as e:
            return f"Error downloading {file_id}: {e}"
        except httpx.ConnectError:
            return f"Error downloading {file_id}: Cannot connect to file gateway"
        except httpx.TimeoutException:
            return f"Error downloading {file_id}: Download timed out"
        finally:
            if partial_file.exists():
                partial_file.unlink()

        logger.info(f"Downloaded {file_id} to {output_file} ({size} bytes)")
        return f"Downloaded: {filename} -> {output_file} ({format_file_size(size)}, {info['digest_type']} verified)"
