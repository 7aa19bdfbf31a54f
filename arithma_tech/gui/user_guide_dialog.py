# arithma_tech/gui/user_guide_dialog.py

from PySide6.QtWidgets import QDialog, QDialogButtonBox, QLabel, QTextBrowser, QVBoxLayout

GUIDE_HTML = """
<h3>What is Arithmetic Encoding?</h3>
<p>
  Arithmetic Encoding is a form of entropy encoding used in lossless data compression.
  It can compress both text and image files (PNG, JPG, BMP, GIF).
  Instead of encoding each symbol with a fixed number of bits, it encodes
  the entire message into one number.
</p>

<h3>How to Use Arithma-Tech</h3>
<ol>
  <li>Select <b>File Input</b> if you want to compress/decompress an image
      (PNG, JPG, BMP, GIF). Or choose <b>Text Input</b> to compress raw text.</li>
  <li>Either drag-and-drop your image or click <b>Browse...</b> to choose one.
      For text, simply type or paste it.</li>
  <li>Click <b>Compress</b> to encode your data, or <b>Decompress</b> to restore it.</li>
  <li>Open the <b>File History</b> dialog from the menu to review and manage logs.</li>
</ol>
"""


class UserGuideDialog(QDialog):
    """A non-modal pop-up explaining arithmetic encoding and how to use the application."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("User Guide")
        self.resize(500, 400)
        self.setModal(False)

        self.layout = QVBoxLayout(self)
        self.heading = QLabel("Arithmetic Encoding - Overview")
        self.heading.setObjectName("GuideHeading")

        self.browser = QTextBrowser()
        self.browser.setOpenExternalLinks(True)
        self.browser.setHtml(GUIDE_HTML)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Close)

        self.layout.addWidget(self.heading)
        self.layout.addWidget(self.browser)
        self.layout.addWidget(self.buttons)

        self.buttons.rejected.connect(self.close)
