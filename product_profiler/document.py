import urllib.parse as urlparse
from dataclasses import dataclass

from bs4 import BeautifulSoup


@dataclass
class ProductDocument:
	soup: BeautifulSoup
	url: str = ""

	@property
	def location_path(self) -> str:
		if not self.url:
			return ""
		return urlparse.urlparse(self.url).path


def parse_document(markup: str, url: str = "") -> ProductDocument:
	# Prefer lxml parser for better structure
	return ProductDocument(BeautifulSoup(markup or "", "lxml"), url)
