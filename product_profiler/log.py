from colorama import Fore, Style, init as colorama_init

# Minimal, structured logging with color
_progress_callback = None


def init_logging() -> None:
	colorama_init(autoreset=True)


def set_progress_callback(callback):
	"""Set a callback function to receive progress updates."""
	global _progress_callback
	_progress_callback = callback


def log_info(message: str) -> None:
	print(Fore.CYAN + "[INFO] " + Style.RESET_ALL + f"{message}")
	if _progress_callback:
		_progress_callback("info", message)


def log_warn(message: str) -> None:
	print(Fore.YELLOW + "[WARN] " + Style.RESET_ALL + f"{message}")
	if _progress_callback:
		_progress_callback("warn", message)


def log_error(message: str) -> None:
	print(Fore.RED + "[ERROR] " + Style.RESET_ALL + f"{message}")
	if _progress_callback:
		_progress_callback("error", message)
