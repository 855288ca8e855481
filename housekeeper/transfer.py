import os
import time
import ftplib
import logging
import tempfile
from dataclasses import dataclass, field

from .filesystem import list_regular_files, _format_bytes

class FtpClient:
    """Uploads a single file per session, opening and closing the connection each time."""

    def __init__(self, ftp_config, ftp_factory=None):
        self.host = ftp_config['HOST']
        self.port = int(ftp_config['PORT'])
        self.user = ftp_config['USER']
        self.password = ftp_config['PASSWORD']
        self.remote_dir = ftp_config['REMOTE_DIR']
        self.timeout = ftp_config['TIMEOUT']
        self.use_tls = ftp_config['USE_TLS']
        self.passive = ftp_config['PASSIVE']
        if ftp_factory is None:
            ftp_factory = ftplib.FTP_TLS if self.use_tls else ftplib.FTP
        self.ftp_factory = ftp_factory

    def remote_url(self, remote_name):
        scheme = 'ftps' if self.use_tls else 'ftp'
        remote_path = f"{self.remote_dir.rstrip('/')}/{remote_name}"
        return f"{scheme}://{self.host}:{self.port}{remote_path}"

    def upload(self, local_path, remote_name):
        ftp = self.ftp_factory()
        try:
            ftp.connect(self.host, self.port, timeout=self.timeout)
            ftp.login(self.user, self.password)
            if self.use_tls:
                ftp.prot_p()
            ftp.set_pasv(self.passive)
            if self.remote_dir:
                ftp.cwd(self.remote_dir)
            with open(local_path, 'rb') as local_file:
                ftp.storbinary(f"STOR {remote_name}", local_file)
            # STOR succeeded, QUIT errors do not count as a failed upload
            try:
                ftp.quit()
            except ftplib.all_errors as e:
                logging.warning(f"Upload of {remote_name} completed but QUIT failed: {e}")
        finally:
            ftp.close()

@dataclass
class TransferSummary:
    succeeded: list = field(default_factory=list)
    failed: list = field(default_factory=list)

    @property
    def ok(self):
        return not self.failed

def read_failed_transfers(path):
    """File names recorded in the failed-transfer file, in order, without blanks or duplicates."""
    try:
        with open(path, 'r', encoding='utf-8', errors='surrogateescape') as failed_file:
            names = [line.strip() for line in failed_file]
    except FileNotFoundError:
        return []
    return list(dict.fromkeys(name for name in names if name))

def write_failed_transfers(path, names):
    """Atomically replace the failed-transfer file with the given names."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, temp_path = tempfile.mkstemp(prefix='.failed_transfers.', dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', errors='surrogateescape') as temp_file:
            for name in names:
                temp_file.write(f"{name}\n")
        os.replace(temp_path, path)
    except BaseException:
        try:
            os.remove(temp_path)
        except OSError:
            pass
        raise

class TransferManager:
    def __init__(self, config, notification_mgr, client=None, dry_run=False, sleep=time.sleep):
        self.config = config
        self.notification_mgr = notification_mgr
        self.client = client or FtpClient(config['FTP'])
        self.dry_run = dry_run
        self.sleep = sleep
        self.local_dir = config['Paths']['LOCAL_DIR']
        self.failed_file = config['Paths']['FAILED_TRANSFERS_FILE']
        self.max_retries = config['Settings']['MAX_RETRIES']
        self.retry_delay = config['Settings']['RETRY_DELAY']

    def _save_failed(self, names):
        if self.dry_run:
            logging.debug(f"DRY RUN: Would record {len(names)} failed transfers in {self.failed_file}")
            return
        write_failed_transfers(self.failed_file, names)

    def transfer_file(self, filename):
        local_path = os.path.join(self.local_dir, filename)
        dest = self.client.remote_url(filename)

        for attempt in range(1, self.max_retries + 1):
            logging.info(f"Attempting to transfer file: {filename} (Attempt {attempt}/{self.max_retries})")
            try:
                file_size = os.path.getsize(local_path)
                if not self.dry_run:
                    self.client.upload(local_path, filename)
                logging.info(
                    f"{'Would upload' if self.dry_run else 'Uploaded'} {_format_bytes(file_size)}",
                    extra={'file_op': True, 'src': local_path, 'dest': dest}
                )
                logging.info(f"SUCCESS: File {filename} transferred successfully")
                return True
            except ftplib.all_errors + (UnicodeError,) as e:
                logging.warning(f"FAILED: File {filename} transfer failed (Attempt {attempt}/{self.max_retries}): {e}")

            if attempt < self.max_retries:
                logging.info(f"Waiting {self.retry_delay:g} seconds before retry...")
                self.sleep(self.retry_delay)

        logging.error(f"ERROR: File {filename} failed after {self.max_retries} attempts")
        return False

    def process_directory(self):
        summary = TransferSummary()
        self._save_failed([])

        logging.info(f"Starting FTP transfer process for files in {self.local_dir}")

        for filename in list_regular_files(self.local_dir):
            if self.transfer_file(filename):
                summary.succeeded.append(filename)
            else:
                summary.failed.append(filename)
                self._save_failed(summary.failed)

        logging.info(
            f"FTP transfer process completed. Processed: {len(summary.succeeded)}, Failed: {len(summary.failed)}"
        )

        if summary.failed:
            self.notification_mgr.notify_transfer_failures(summary.failed)
        return summary

    def retry_failed_transfers(self):
        summary = TransferSummary()
        pending = read_failed_transfers(self.failed_file)
        if not pending:
            logging.info("No failed transfers to retry")
            return summary

        logging.info(f"Retrying {len(pending)} previously failed transfers")
        for filename in pending:
            logging.info(f"Retrying transfer for file: {filename}")
            if self.transfer_file(filename):
                summary.succeeded.append(filename)
            else:
                summary.failed.append(filename)

        self._save_failed(summary.failed)

        logging.info(
            f"Retry process completed. Successfully retried: {len(summary.succeeded)}, "
            f"Still failed: {len(summary.failed)}"
        )

        if summary.failed:
            self.notification_mgr.notify_retry_failures(summary.failed)
        return summary
