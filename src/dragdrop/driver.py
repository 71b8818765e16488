from selenium import webdriver
from selenium.webdriver.chrome.service import Service
from webdriver_manager.chrome import ChromeDriverManager
from selenium.webdriver.chrome.options import Options
from .. import config

def create_driver():
    options = Options()
    if config.HEADLESS:
        options.add_argument("--headless=new")
        # headless has no real window; give layout a fixed viewport
        options.add_argument("--window-size=1400,1000")
    else:
        options.add_argument("--start-maximized")
    driver = webdriver.Chrome(service=Service(ChromeDriverManager().install()),
                              options=options)
    driver.implicitly_wait(config.IMPLICIT_WAIT)
    return driver
