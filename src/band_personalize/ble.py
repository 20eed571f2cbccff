from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar, cast

import async_timeout
from bleak import BleakScanner
from bleak.backends.characteristic import BleakGATTCharacteristic
from bleak.backends.device import BLEDevice
from bleak.backends.service import BleakGATTServiceCollection
from bleak.exc import BleakDBusError
from bleak_retry_connector import (
    BleakClientWithServiceCache,
    BleakError,
    BleakNotFoundError,
    establish_connection,
)

from .adapter import BandConnectionType, DeviceInfo, NativeImage, NativeTheme
from .cancellation import CancellationToken
from .const import (
    DEFAULT_ATTEMPTS,
    DEFAULT_CHUNK_SIZE,
    OPCODE_GET_IMAGE,
    OPCODE_GET_THEME,
    OPCODE_HARDWARE_VERSION,
    OPCODE_SET_IMAGE,
    OPCODE_SET_THEME,
    RESPONSE_TIMEOUT,
    RETRY_BACKOFF,
    SCAN_TIMEOUT,
)
from .exceptions import CharacteristicMissingError, DeviceOperationError
from .protocol import BandProtocol, Response, ResponseAssembler

WrapFuncType = TypeVar("WrapFuncType", bound=Callable[..., Any])

RETRY_EXCEPTIONS = (asyncio.TimeoutError, BleakError, EOFError)
_LOGGER = logging.getLogger(__name__)


def retry_bluetooth_connection_error(func: WrapFuncType) -> WrapFuncType:
    """Retry a session request on transient Bluetooth errors.

    Errors outside RETRY_EXCEPTIONS are raised at once, as is a band that
    cannot be found. D-Bus errors back off before the next attempt.
    """

    async def _async_wrap_retry_bluetooth_connection_error(
        self: "BleakBandSession", *args: Any, **kwargs: Any
    ) -> Any:
        for attempt in range(1, self.retry_count + 1):
            try:
                return await func(self, *args, **kwargs)
            except BleakNotFoundError:
                raise
            except RETRY_EXCEPTIONS as err:
                if attempt >= self.retry_count:
                    _LOGGER.debug(
                        "%s: %s calling %s, giving up after %s attempts",
                        self.name,
                        type(err).__name__,
                        func.__name__,
                        attempt,
                    )
                    raise
                _LOGGER.debug(
                    "%s: %s calling %s, retrying (%s/%s)",
                    self.name,
                    type(err).__name__,
                    func.__name__,
                    attempt,
                    self.retry_count,
                    exc_info=True,
                )
                if isinstance(err, BleakDBusError):
                    await asyncio.sleep(RETRY_BACKOFF)
        raise RuntimeError("Unreachable")

    return cast(WrapFuncType, _async_wrap_retry_bluetooth_connection_error)


class BleakBandAdapter:
    """DeviceAdapter for bands reachable over Bluetooth LE.

    The personalization service is found by trying each candidate read
    (notify) and write characteristic UUID in order.

    Messages use the BandProtocol framing, which this package defines. A
    stock band does not implement it, so the device must run a matching
    service for this adapter to work.
    """

    def __init__(
        self,
        read_characteristics: Sequence[str],
        write_characteristics: Sequence[str],
        name_prefix: str | None = None,
        retry_count: int = DEFAULT_ATTEMPTS,
        response_timeout: float = RESPONSE_TIMEOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Init the BleakBandAdapter."""
        if not read_characteristics or not write_characteristics:
            raise ValueError("At least one read and one write characteristic needed")
        self._read_characteristics = list(read_characteristics)
        self._write_characteristics = list(write_characteristics)
        self._name_prefix = name_prefix
        self._retry_count = max(retry_count, 1)
        self._response_timeout = response_timeout
        self._chunk_size = chunk_size
        self._cached_services: dict[str, BleakGATTServiceCollection] = {}

    async def get_devices(self) -> list[DeviceInfo]:
        """Scan for bands, filtered by name prefix when one is set."""
        devices = await BleakScanner.discover(timeout=SCAN_TIMEOUT)
        return [
            DeviceInfo(
                device.name or device.address, BandConnectionType.BLUETOOTH, device
            )
            for device in devices
            if self._name_prefix is None
            or (device.name or "").startswith(self._name_prefix)
        ]

    async def connect(self, info: DeviceInfo) -> BleakBandSession:
        """Connect to a band and subscribe to its responses."""
        ble_device = info.handle
        if not isinstance(ble_device, BLEDevice):
            raise DeviceOperationError(f"{info.name}: not a Bluetooth LE device")
        session = BleakBandSession(
            info.name,
            retry_count=self._retry_count,
            response_timeout=self._response_timeout,
            chunk_size=self._chunk_size,
        )
        _LOGGER.debug("%s: Connecting; RSSI: %s", info.name, _rssi(ble_device))
        client = await establish_connection(
            BleakClientWithServiceCache,
            ble_device,
            info.name,
            session.disconnected,
            max_attempts=self._retry_count,
            cached_services=self._cached_services.get(ble_device.address),
            ble_device_callback=lambda: ble_device,
        )
        _LOGGER.debug("%s: Connected; RSSI: %s", info.name, _rssi(ble_device))
        try:
            read_char, write_char = self._resolve_characteristics(client.services)
            self._cached_services[ble_device.address] = client.services
            await session.start(client, read_char, write_char)
        except BaseException:
            self._cached_services.pop(ble_device.address, None)
            await client.disconnect()
            raise
        return session

    def _resolve_characteristics(
        self, services: BleakGATTServiceCollection
    ) -> tuple[BleakGATTCharacteristic, BleakGATTCharacteristic]:
        """Resolve characteristics."""
        read_char = write_char = None
        for characteristic in self._read_characteristics:
            if char := services.get_characteristic(characteristic):
                read_char = char
                break
        for characteristic in self._write_characteristics:
            if char := services.get_characteristic(characteristic):
                write_char = char
                break
        if read_char is None:
            raise CharacteristicMissingError("Read characteristic missing")
        if write_char is None:
            raise CharacteristicMissingError("Write characteristic missing")
        return read_char, write_char


class BleakBandSession:
    """DeviceSession over one connected BleakClient.

    Requests are serialized by a lock: a request is written in chunks and
    the session waits for the matching response notification.
    """

    def __init__(
        self,
        name: str,
        retry_count: int = DEFAULT_ATTEMPTS,
        response_timeout: float = RESPONSE_TIMEOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.name = name
        self.retry_count = max(retry_count, 1)
        self._response_timeout = response_timeout
        self._chunk_size = chunk_size
        self._protocol = BandProtocol()
        self._assembler = ResponseAssembler()
        self._operation_lock = asyncio.Lock()
        self._client: BleakClientWithServiceCache | None = None
        self._read_char: BleakGATTCharacteristic | None = None
        self._write_char: BleakGATTCharacteristic | None = None
        self._response: asyncio.Future[Response] | None = None
        self._expected_disconnect = False

    async def start(
        self,
        client: BleakClientWithServiceCache,
        read_char: BleakGATTCharacteristic,
        write_char: BleakGATTCharacteristic,
    ) -> None:
        """Subscribe to notifications on a freshly connected client."""
        self._client = client
        self._read_char = read_char
        self._write_char = write_char
        _LOGGER.debug("%s: Subscribe to notifications", self.name)
        await client.start_notify(read_char, self._notification_handler)

    @retry_bluetooth_connection_error
    async def get_hardware_version(self, token: CancellationToken) -> str:
        response = await self._request(
            self._protocol.construct_hardware_version_query(),
            OPCODE_HARDWARE_VERSION,
            token,
        )
        return self._protocol.parse_hardware_version(response.payload)

    @retry_bluetooth_connection_error
    async def get_theme(self, token: CancellationToken) -> NativeTheme:
        response = await self._request(
            self._protocol.construct_theme_query(), OPCODE_GET_THEME, token
        )
        return self._protocol.parse_theme(response.payload)

    @retry_bluetooth_connection_error
    async def set_theme(self, theme: NativeTheme, token: CancellationToken) -> None:
        await self._request(
            self._protocol.construct_theme_change(theme), OPCODE_SET_THEME, token
        )

    @retry_bluetooth_connection_error
    async def get_image(self, token: CancellationToken) -> NativeImage:
        response = await self._request(
            self._protocol.construct_image_query(), OPCODE_GET_IMAGE, token
        )
        return self._protocol.parse_image(response.payload)

    @retry_bluetooth_connection_error
    async def set_image(self, image: NativeImage, token: CancellationToken) -> None:
        await self._request(
            self._protocol.construct_image_change(image), OPCODE_SET_IMAGE, token
        )

    async def release(self) -> None:
        """Unsubscribe and disconnect."""
        client = self._client
        read_char = self._read_char
        self._expected_disconnect = True
        self._client = None
        self._read_char = None
        self._write_char = None
        if client and client.is_connected:
            try:
                await client.stop_notify(read_char)
                await client.disconnect()
            except BleakError as ex:
                _LOGGER.warning("%s: Error during disconnect: %s", self.name, ex)

    def disconnected(self, client: BleakClientWithServiceCache) -> None:
        """Disconnected callback."""
        if self._expected_disconnect:
            _LOGGER.debug("%s: Disconnected from device", self.name)
            return
        _LOGGER.warning("%s: Device unexpectedly disconnected", self.name)
        if self._response and not self._response.done():
            self._response.set_exception(BleakError("Device disconnected"))

    def _notification_handler(self, _sender: Any, data: bytearray) -> None:
        """Handle notification responses."""
        _LOGGER.debug("%s: Notification received: %s", self.name, data.hex())
        future = self._response
        try:
            response = self._assembler.feed(data)
        except DeviceOperationError as ex:
            if future and not future.done():
                future.set_exception(ex)
            return
        if response is None:
            return
        if future and not future.done():
            future.set_result(response)
        else:
            _LOGGER.debug(
                "%s: Dropping unsolicited response %#04x", self.name, response.opcode
            )

    async def _request(
        self, message: bytes, opcode: int, token: CancellationToken
    ) -> Response:
        """Write a request and wait for its response."""
        if self._operation_lock.locked():
            _LOGGER.debug(
                "%s: Operation already in progress, waiting for it to complete",
                self.name,
            )
        async with self._operation_lock:
            token.raise_if_cancelled()
            if self._client is None or self._write_char is None:
                raise BleakError(f"{self.name}: Not connected")
            self._assembler.reset()
            self._response = asyncio.get_running_loop().create_future()
            chunks = self._protocol.chunk(message, self._chunk_size)
            _LOGGER.debug(
                "%s: Sending %s bytes in %s writes", self.name, len(message), len(chunks)
            )
            cancelled = asyncio.ensure_future(token.wait())
            try:
                for chunk in chunks:
                    token.raise_if_cancelled()
                    await self._client.write_gatt_char(self._write_char, chunk, False)
                async with async_timeout.timeout(self._response_timeout):
                    await asyncio.wait(
                        (self._response, cancelled),
                        return_when=asyncio.FIRST_COMPLETED,
                    )
                token.raise_if_cancelled()
                response = self._response.result()
            finally:
                cancelled.cancel()
                self._response = None
        if response.opcode != opcode:
            raise DeviceOperationError(
                f"Expected response {opcode:#04x}, got {response.opcode:#04x}"
            )
        return response


def _rssi(ble_device: BLEDevice) -> Any:
    return getattr(ble_device, "rssi", None)
